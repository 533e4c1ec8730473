from setuptools import setup, find_packages

setup(
    name="mc-explorer-graph",
    version="1.0.0",
    description="Incremental relationship graph engine for marketing-automation asset exploration",
    packages=find_packages(include=["mc_explorer", "mc_explorer.*"]),
    include_package_data=True,
    install_requires=[
        # Core data modeling and validation
        "pydantic>=2.0.0",

        # Environment variables
        "python-dotenv>=1.0.0",

        # CLI and rich output
        "typer>=0.9.0",
        "rich>=13.0.0",

        # YAML snapshots
        "pyyaml>=6.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mc-explorer = mc_explorer.cli:main",
        ],
    },
    python_requires=">=3.11",
)
