from setuptools import setup, find_namespace_packages

setup(
    name='epic-kneedle',
    version='1.0.0',
    description='Kneedle knee and elbow detection for discrete curves',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    author='Assaf Ben-David, Yonatan Perry, Uri Sternfeld',
    license='MIT License',
    url='https://github.com/Cybereason/epic-kneedle',
    python_requires=">=3.10",
    packages=find_namespace_packages(include=['epic.*']),
    zip_safe=False,
    install_requires=[
        'numpy>=1.21.5',
        'pandas>=1.4.4',
        'scipy>=1.7.3',
        'scikit-learn>=1.1.1',
        'matplotlib',
        'epic-logging',
        'epic-common',
    ],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
    ],
)
