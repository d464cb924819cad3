from setuptools import setup, find_packages

setup(
    name="pySinkhorn",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "scipy",
        "pandas",
        "matplotlib",
        "joblib",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
