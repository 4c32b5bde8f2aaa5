# setup.py
from setuptools import setup, find_packages

setup(
    name="help-view",
    version="0.1.0",
    description="Help document viewer with an asynchronous resource loader",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"help_view": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "jinja2>=3.1",
        "Pillow>=10.0",
        "psygnal>=0.11",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "help-view=help_view.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
