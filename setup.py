from setuptools import setup, find_packages

setup(
    name='tmx_splitter',
    version='1.0.0',
    description='Streaming splitter for large TMX translation memories',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.8',
    install_requires=[
        'pyyaml>=6.0',
        'python-dotenv>=1.0.0',
        'tqdm>=4.66.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'pytest-cov>=4.1.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.5.0',
        ]
    },
    entry_points={
        'console_scripts': [
            'tmx-split = tmx_splitter.cli.main:main',
        ]
    },
)
