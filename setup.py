from setuptools import setup, find_namespace_packages

setup(
    name="aquasync_backend",
    version="0.1",
    packages=find_namespace_packages(include=["services", "utils"]),
    py_modules=["main", "models", "config"],
    install_requires=[
        "fastapi>=0.111.0",
        "uvicorn[standard]>=0.30.0",
        "pydantic>=2.7.0",
        "pydantic-settings>=2.2.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0.0",
            "httpx>=0.27.0",
            "hypothesis>=6.100.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "aquasync=main:run",
        ],
    },
)
