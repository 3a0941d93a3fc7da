# setup.py
from setuptools import setup, find_packages

setup(
    name="finance-visualizer",
    version="0.1.0",
    description="Personal finance tracker with a summary dashboard and JSON API",
    author="Your Name",
    author_email="you@example.com",
    url="https://github.com/yourusername/finance-visualizer",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"webapp": ["templates/*.html"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "click>=7.0",
        "pyyaml>=5.3",
        "python-dotenv>=0.19",
        "fastapi>=0.108",
        "jinja2>=3.0",
        "python-multipart>=0.0.6",
        "uvicorn>=0.20",
        "mcp>=1.0,<2",
        "anyio>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "finance-visualizer=finance_visualizer.cli:main",
            "finance-visualizer-api=finance_visualizer.web:main",
            "finance-visualizer-mcp=finance_visualizer.mcp_server:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
