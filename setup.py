
from setuptools import setup, find_packages
setup(
    name="sorted_hash_table",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=["numpy", "xxhash>=2.0"],
    extras_require={"test": ["pytest", "hypothesis"]},
    python_requires=">=3.9",
)
