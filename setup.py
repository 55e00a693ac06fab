from pathlib import Path

from setuptools import find_namespace_packages, setup

root = Path(__file__).parent
readme = root / "README.md"

setup(
    name="wiretree",
    version="0.1.0",
    description="Server-rendered trees of stateful widgets with partial page updates.",
    long_description=readme.read_text("utf-8") if readme.exists() else "",
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["wiretree", "wiretree.*"]),
    python_requires=">=3.9",
    install_requires=[
        "jinja2>=3.0",
        "markupsafe>=2.0",
        "rich>=13.0",
        "rich-click>=1.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "wiretree = wiretree.cli.main:cli",
        ],
    },
    zip_safe=False,
)
