import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="document_compositor",
    version="1.0.0",
    author="Alejandro Sanchez Ferrer",
    author_email="asanc.tech@gmail.com",
    description="Document image generator: randomized text, signature and watermarks over a fixed template",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "opencv-python",
        "Pillow>=10.1",
        "pydantic>=2",
        "PyYAML",
        "loguru",
        "fastapi",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
            "matplotlib",
        ],
    },
    entry_points={
        "console_scripts": [
            "render-document=composition.cli:main",
            "document-generator-api=api.main:main",
        ],
    },
)
