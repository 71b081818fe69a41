from setuptools import setup, find_namespace_packages

setup(
    name="audioshelf",
    version="0.1.0",
    packages=find_namespace_packages(include=['api*', 'cli*', 'core*']),
    include_package_data=True,
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "alembic",
        "fastapi",
        "pydantic>=2",
        "uvicorn",
        "requests",
        "Pillow>=10.1",
        "PyJWT[crypto]",
        "boto3",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "audioshelf=cli.main:main",
        ],
    },
)
