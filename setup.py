from setuptools import setup, find_packages

setup(
    name="uiauto-web",
    version="1.0.0",
    packages=find_packages(include=["uiauto_web", "uiauto_web.*"]),
    install_requires=[
        "pyyaml>=5.4",
        "jsonschema>=4.0.0",
        "playwright>=1.40",
    ],
    extras_require={
        "test": ["pytest>=7.0", "pytest-asyncio>=0.23"],
    },
    python_requires=">=3.9",
    package_data={
        "uiauto_web": ["schemas/*.json"],
    },
    entry_points={
        "console_scripts": [
            "uiauto-web=uiauto_web.cli:main",
        ],
    },
)
