from setuptools import setup, find_packages

setup(
    name='k8snetperf',
    version='0.1.0',
    license='Apache 2.0',
    description='Aggregates and reports netperf results from Kubernetes '
                'network benchmarks.',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',
    install_requires=['absl-py',
                      'colorlog',
                      'numpy'],
    extras_require={
        'test': ['mock',
                 'pytest'],
    })
