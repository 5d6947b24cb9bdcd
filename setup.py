"""
setup.py - Package Installation Configuration
==============================================
"""

from setuptools import setup
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
if readme_file.exists():
    long_description = readme_file.read_text()
else:
    long_description = "Time-boxed Branch & Bound solver for the Traveling Salesman Problem"

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
if requirements_file.exists():
    with open(requirements_file) as f:
        requirements = [line.strip() for line in f
                       if line.strip() and not line.startswith('#')]
else:
    requirements = [
        'numpy>=1.21.0',
        'PyYAML>=5.4',
    ]

setup(
    name='bb-tsp-solver',
    version='1.0.0',
    author='TSP Solver Team',
    description='Time-boxed Branch & Bound search for near-optimal TSP tours',
    long_description=long_description,
    long_description_content_type='text/markdown',
    py_modules=[
        'bb_cost_matrix',
        'bb_search_node',
        'bb_priority_queue',
        'bb_tsp_solver',
        'config',
        'time_management',
        'utils',
        'warm_start',
    ],
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Mathematics',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
    install_requires=requirements,
    extras_require={
        'test': [
            'pytest>=6.2.0',
        ],
        'dev': [
            'pytest>=6.2.0',
            'black>=21.6b0',
            'flake8>=3.9.0',
            'mypy>=0.910',
            'coverage>=5.5',
        ],
    },
    zip_safe=False,
)
