from setuptools import setup, find_packages

setup(
    name="nodegraph",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[
        "requests>=2.25.0",
        "numpy>=1.21",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "nodegraph=nodegraph.cli:main",
        ],
    },
    python_requires=">=3.8",
    zip_safe=False,
)
