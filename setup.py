"""Setup script for Hotel PMS."""
from setuptools import setup, find_packages

setup(
    name="hotel-pms",
    version="1.0.0",
    description="Hotel property management backend with dynamic room pricing",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.27",
        "sqlalchemy>=2.0",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "httpx>=0.26",
        ],
    },
)
