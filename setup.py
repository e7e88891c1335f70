from setuptools import setup, find_packages

setup(
    name="stdpkgs-gen",
    version="1.0.0",
    description="Generates the static Go standard library package index (stdpkgs.go)",
    author="Ashwin Nair",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "PyYAML>=6.0",
        "rich>=13.0",
        "tqdm>=4.60",
        "argcomplete>=3.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "stdpkgs-gen = apps.cli:cli_stdpkgs_gen",
            "stdpkgs-config = common.shared.loader:cli_main",
        ],
    },
)
