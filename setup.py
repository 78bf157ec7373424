from setuptools import setup, find_packages

setup(
    name="composescale",
    version="0.1.0",
    packages=find_packages(include=["composescale", "composescale.*"]),
    python_requires=">=3.10",
    install_requires=[
        "async-timeout==5.0.1",
        "docker==7.1.0",
        "python-dotenv==1.0.1",
        "PyYAML==6.0.2",
        "requests==2.32.3",
    ],
    extras_require={
        "test": [
            "pytest==8.3.4",
            "pytest-asyncio==0.25.3",
        ],
    },
    entry_points={
        "console_scripts": [
            "composescale=composescale.cli:main",
        ],
    },
)
