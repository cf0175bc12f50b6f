"""Setup configuration for ar-box-stacking."""
from setuptools import setup

setup(
    name="ar-box-stacking",
    version="0.1.0",
    description="Placement engine for stacking boxes on a pallet or in a truck bed",
    author="Louis",
    author_email="",
    py_modules=["config", "run_session"],
    packages=["engine", "dataset", "visualization"],
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.10.0",
        "pyyaml>=6.0.0",
        "numpy>=2.2.0",
    ],
    extras_require={
        "dev": [
            "pytest>=9.0.0",
            "pytest-cov>=6.0.0",
            "ruff>=0.15.0",
            "mypy>=1.19.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "box-session=run_session:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
