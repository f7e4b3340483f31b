"""
Setup script for the Projective Reconstruction package.
"""

from setuptools import setup, find_packages
import os


def read_readme():
    """Read README file for long description."""
    if os.path.exists('README.md'):
        with open('README.md', 'r', encoding='utf-8') as f:
            return f.read()
    return "Projective scene reconstruction from a pairwise image graph"


# Core requirements (always installed)
install_requires = [
    'numpy>=1.19.0',
    'opencv-python>=4.5.0',
]

# Optional dependencies for different use cases
extras_require = {
    'dev': [
        'pytest>=6.0.0',
        'pytest-cov>=2.12.0',
        'black>=21.0.0',
        'isort>=5.9.0',
        'flake8>=3.9.0'
    ],
}
extras_require['test'] = extras_require['dev'][:2]

setup(
    name="projective-reconstruction",
    version="1.0.0",
    description="Projective scene reconstruction and local view selection from a pairwise image graph",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=['ProjectiveReconstruction', 'ProjectiveReconstruction.*']),
    py_modules=['run_projective_reconstruction'],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Image Processing",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        'console_scripts': [
            'projective-reconstruction=run_projective_reconstruction:main',
        ],
    },
    keywords=[
        "computer vision",
        "structure from motion",
        "projective reconstruction",
        "view graph",
        "bundle adjustment",
        "opencv"
    ],
)
