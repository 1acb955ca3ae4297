import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="clusterexp",
    version="0.1.0",
    author="clusterexp",
    author_email="clusterexp@users.noreply.github.com",
    description="Approximate density operators of composite quantum systems through correlation expansions",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=['clusterexp', 'clusterexp.quantum', 'clusterexp.correlations', 'clusterexp.utils',
              'clusterexp.utils.logging'],
    install_requires=['numpy', 'scipy>=1.12', 'tabulate', 'platformdirs', 'exqalibur'],
    extras_require={"test": ["pytest", "pytest-cov"]},
    python_requires=">=3.9",
)
