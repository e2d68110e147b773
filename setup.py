from setuptools import setup, find_packages

setup(
    name="intern_tracker",
    version="0.1.0",
    packages=find_packages(),
    py_modules=["main", "init_db"],
    install_requires=[
        # Web Framework
        "fastapi>=0.109.2",
        "uvicorn[standard]>=0.27.1",
        "pydantic[email]>=2.5",
        "python-jose[cryptography]>=3.3.0",
        "passlib[bcrypt]>=1.7.4",
        # passlib 1.7.4 breaks on the bcrypt 4.1+ backend probe
        "bcrypt>=4.0.1,<4.1",

        # Database
        "sqlalchemy>=2.0.27",

        # Utilities
        "python-dotenv>=1.0.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "httpx>=0.25",
        ],
    },
)
