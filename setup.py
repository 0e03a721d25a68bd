from setuptools import setup, find_packages

setup(
    name='snapkv',
    version='1.0.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    entry_points={
        'console_scripts': [
            'snapkv=snapkv.cli.snapkv_cli:main',
        ],
    },
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.8',
)
