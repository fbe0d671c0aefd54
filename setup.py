# setup.py
from setuptools import setup, find_packages

# Version is defined here to avoid import issues during build
__version__ = "1.0.0"

setup(
    name='ananta-sync',
    version=__version__,
    description='Ananta Sync - account-scoped synchronization of extension data with checksums and optimistic versions.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    author='Ananta',
    author_email='dev@ananta.app',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=[
        'click>=8.1.0',
        'rich>=13.0.0',
        'PyYAML>=6.0',
        'pydantic>=2.0',
        'httpx>=0.25.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.4',
            'pytest-asyncio>=0.23',
        ],
    },
    entry_points={
        'console_scripts': [
            'ananta-sync = anantasync.cli:cli',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Utilities",
    ],
    python_requires='>=3.10',
    keywords='sync, browser extension, checksum, optimistic concurrency',
)
