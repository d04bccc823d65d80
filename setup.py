# setup.py
from setuptools import setup, find_packages

setup(
    name="malt",
    version="0.1.0",
    description="Reader (tokenizer + parser) and read-print loop for a small Clojure-flavoured Lisp",
    packages=find_packages(include=["malt", "malt.*"]),
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["malt = malt.repl:main"],
    },
    zip_safe=False,
)
