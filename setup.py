from setuptools import setup, find_packages
import re

# Read version from thaitax/__init__.py
with open('thaitax/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='thai-tax',
    version=version,
    packages=find_packages(include=['thaitax', 'thaitax.*']),
    package_data={
        'thaitax': ['tax_rules/*.yaml'],
    },
    include_package_data=True,
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'thai-tax=thaitax.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Thailand personal income tax calculator and deduction planner.',
    python_requires='>=3.10',
)
