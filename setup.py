from setuptools import setup, find_packages

with open('requirements.txt') as f:
    required = f.read().splitlines()

setup(
    name='platinum_rift',
    version='0.1',
    packages=find_packages(exclude=['tests']),
    py_modules=['strategic_rift_bot'],
    description='Turn decision engine for the Platinum Rift territory-control bot.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    python_requires='>=3.8',
    install_requires=required,
    extras_require={'test': ['pytest']},
)
