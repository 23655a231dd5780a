from setuptools import setup, find_packages

setup(
    name="zeatmap",
    version="1.0.0",
    description="Calendar heatmap grid widget for PySide6",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=[
        'PySide6>=6.5.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'zeatmap-demo=main:main',
        ],
    },
    python_requires='>=3.9',
)
