from setuptools import setup, find_packages
import os

install_requires = ["pydantic>=2.7"]

# Define optional dependencies for development and specific features
extras_require = {
    "dev": ["pytest", "pygls>=1.0.0,<2"],
    "test": ["pytest", "pygls>=1.0.0,<2"],
    "lsp": ["pygls>=1.0.0,<2"],  # Language Server Protocol support
}

setup(
    name="lox-interpreter",
    version="1.0.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "lox = lox.cli:main",
            "lox-lsp = lox.server:start_server",
        ],
    },
    include_package_data=True,
    package_data={},
    description="A tree-walking interpreter for the Lox scripting language.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
