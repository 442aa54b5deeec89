# Copyright 2023 The PhisJax Authors

# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at

#     http://www.apache.org/licenses/LICENSE-2.0

# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import re

from setuptools import find_packages, setup

with open('src/phisjax/version.py', encoding='utf-8') as f:
    _current_version = re.search(r'__version__ = "([^"]+)"', f.read()).group(1)

with open('README.md', encoding='utf-8') as f:
    _long_description = f.read()

keywords = [
    'jax', 'high-energy-physics', 'flavour-physics', 'cp-violation', 'probability-density',
    'time-resolution'
]

setup(
    name='phisjax',
    version=_current_version,
    package_dir={'': 'src'},
    packages=find_packages(where='src', exclude=[
        'tests',
        'tests.*',
    ]),
    license='Apache 2.0',
    description='A JAX-based decay-time and angular signal density for the phi_s measurement',
    long_description=_long_description,
    long_description_content_type='text/markdown',
    python_requires='>=3.10',
    install_requires=['equinox', 'jax', 'jaxtyping', 'loguru', 'numpy'],
    extras_require={'test': ['absl-py', 'chex', 'pytest', 'scipy']},
    classifiers=[
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX :: Linux",
    ],
    zip_safe=False,
    keywords=keywords,
)
