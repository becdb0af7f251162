import os
from setuptools import find_packages, setup
from backuparchive import __version__


# We use the README as the long_description
readme_path = os.path.join(os.path.dirname(__file__), "README.rst")


setup(
    name='backuparchive',
    version=__version__,
    description='Read access to compressed cluster backup archives',
    long_description=open(readme_path).read(),
    license='BSD',
    zip_safe=False,
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=["click", "boto3", "botocore"],
    extras_require={"test": ["pytest"]},
    entry_points={'console_scripts': [
        'backuparchive = backuparchive.cli:main',
    ]},
)
