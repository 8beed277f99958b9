from setuptools import setup, find_packages

setup(
    name="stagegate",
    version="0.1.0",
    description="Gate CI pipeline stages on a flat properties marker file",
    author="stagegate",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pydantic>=2.0.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "stagegate=stagegate.cli:main",
        ],
    },
    python_requires=">=3.8",
)
