from setuptools import setup, find_packages

setup(
    name="markconv",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "marko>=2.0.0",
        "python-frontmatter>=1.0.0",
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'markconv=markconv.cli:main',
        ],
    },
    author="markconv Contributors",
    description="Convert between Markdown, HTML and plain text",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    license="MIT",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.9',
)
