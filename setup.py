from setuptools import setup

setup(
    name='treelox-interpreter',
    version='0.1.0',
    description='Tree-walking Lox interpreter with a mark-and-sweep heap',
    package_dir={'': 'src'},
    packages=[
        'treelox',
        'treelox.cli',
        'treelox.evaluator',
        'treelox.memory',
        'treelox.parser',
        'treelox.safety',
    ],
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=[
        'click>=7.0',
        'rich>=10.0'
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'tlox = treelox.cli.main:cli'
        ]
    },
    classifiers=[
        'Programming Language :: Python :: 3',
    ],
)
