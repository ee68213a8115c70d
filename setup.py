import os
import os.path
import setuptools # type: ignore

root_path = os.path.dirname(__file__)

with open(os.path.join(root_path, "README.md"), "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="dominion",
    version="0.1.0",
    description="Dominion Rising: Veins of Fate. A narrative event engine and text game of vampiric rule.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(where="src"),
    package_dir={'': 'src'},

    package_data={
        'dominion': ['py.typed'],
        'dominion.data': ['*.toml', 'events/*/*.json', 'events/*/Event_List/*.json'],
    },
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    install_requires=[
        "numpy",
        "toml",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    python_requires='>=3.11',
    entry_points={
        'console_scripts': [
            'dominion = dominion.sim:main',
        ],
    },
)
