from setuptools import setup, find_packages

install_requires = [

]

tests_require = [
    "pytest",
    "hypothesis",
    "cytoolz",
    "flaky",
]

setup(
    name = "flowz",
    version = "0.1.0",
    author = "Cristian Garcia",
    author_email = "cgarcia.e88@gmail.com",
    description = ("Concurrent, back-pressured channel pipelines on threads"),
    license = "MIT",
    keywords = ["pipeline", "channels", "concurrency", "threads"],
    packages = find_packages(include=["flowz", "flowz.*"]),
    package_data={
        '': ['LICENCE', 'README.md'],
    },
    include_package_data = True,
    python_requires = ">=3.8",
    install_requires = install_requires,
    extras_require = {
        "test": tests_require,
    },
)
