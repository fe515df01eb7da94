from setuptools import find_packages, setup

setup(
    name="unfolds",
    version="0.1.0",
    description="Lazy sequences unfolded from a state and a transition function, with size and element type metadata",
    packages=find_packages(include=["unfolds", "unfolds.*"]),
    python_requires=">=3.10",
    install_requires=["numpy", "pydantic>=2", "pyyaml"],
    extras_require={"test": ["pytest"]},
)
