from pathlib import Path

from setuptools import find_packages, setup


ROOT = Path(__file__).parent
LONG_DESCRIPTION = (ROOT / "README.md").read_text(encoding="utf-8")


setup(
    name="pericope",
    version="0.1.0",
    description="Recognize, normalize and format Bible references in free text.",
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    license="MIT",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"pericope.data": ["books.yaml"]},
    python_requires=">=3.9",
    install_requires=[
        "PyYAML>=6.0.1",
    ],
    extras_require={"test": ["pytest>=7.0"]},
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Text Processing :: Linguistic",
    ],
)
