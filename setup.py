from setuptools import setup, find_packages

# Core dependencies that are always needed
CORE_DEPS = [
    "pillow>=11.1.0",  # Required for image decoding and JPEG normalization
    "python-dstools>=0.1.4",
    "globalog",
    "PyPDF2>=3.0.1",  # Required for PDF validation, page counting and text extraction
    "numpy>=1.26.4",  # Required for basic array operations
    "opencv-python>=4.11.0.86",  # Camera capture and page straightening
    "reportlab>=4.2.0",  # PDF assembly
    "pymupdf>=1.24.0",  # Page rendering for covers and the viewer
    "httpx>=0.27.0",  # Remote book store client
    "google-genai>=1.0.0",  # AI bridge
    "typer>=0.12.0",
    "typing_extensions",
]

# Optional dependencies for specific features
EXTRAS = {
    "dev": [
        "pytest>=8.3.5",
        "flake8>=7.2.0",
        "mypy>=1.15.0",
        "black>=25.1.0",
    ],
}


setup(
    name="scanbook",
    version="0.1.0",
    description="Scan pages with a camera or from files, assemble them into PDFs and read them with AI help",
    author="Scanbook Team",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=CORE_DEPS,
    extras_require=EXTRAS,
    entry_points={
        "console_scripts": [
            "scanbook=scanbook.cli:app",
        ],
    },
    scripts=[
        "examples/basic_usage.py",
    ],
)
