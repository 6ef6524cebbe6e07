from setuptools import setup, find_packages

def parse_requirements(filename):
    with open(filename, 'r') as f:
        return [line.strip() for line in f.readlines() \
                if line.strip() and not line.startswith("#")]

setup(
    name="hypergrid-ml",
    version="0.1.0",
    description="Grid and randomized hyperparameter search for a quantized gradient-boosting trainer",
    packages=find_packages(include=['hypergrid', 'hypergrid.*']),
    python_requires=">=3.10",
    install_requires=parse_requirements('requirements.txt'),
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "hypergrid = hypergrid.cli_app:app",
        ],
    },
)
