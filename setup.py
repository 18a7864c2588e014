from setuptools import find_packages, setup

setup(
    name="mpfluor",
    version="0.1.0",
    description="Synthetic photodiode datasets for Nile Red stained microplastics",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "numpy",
        "pandas",
        "pydantic>=2.4",
        "pydantic-settings",
        "annotated-types",
        "rich",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest", "pytest-cov"],
    },
    entry_points={"console_scripts": ["mpfluor=mpfluor.cli:main"]},
)
