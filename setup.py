from setuptools import setup, find_packages


setup(
    name="pakfile",
    version="0.1",
    packages=find_packages(include=["pakfile", "pakfile.*"]),
    description="Reader, builder and CLI for PACK game-content archives, with palette and LMP image codecs.",
    python_requires=">=3.8",
    install_requires=[
        "Pillow>=9.1",
    ],
    entry_points={
        "console_scripts": [
            "pakfile=pakfile.cli:main",
        ]
    },
)
