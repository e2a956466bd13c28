from setuptools import setup, find_packages

VERSION = '0.1.0'
DESCRIPTION = 'Measure algebra for linear referencing system (LRS) geometries'
with open('README.rst') as f:
    LONG_DESCRIPTION = ''.join(f.readlines())

# Setting up
setup(
    name="lrsmeasure",
    version=VERSION,
    description=DESCRIPTION,
#    long_description_content_type="text/x-rst",
    long_description=LONG_DESCRIPTION,
    packages=find_packages(include=['lrsmeasure', 'lrsmeasure.*']),
    install_requires=['numpy', 'shapely>=1.7', 'pandas>=1.1'],
    extras_require={'test': ['pytest']},
    keywords=['python', 'geospatial', 'linear', 'referencing', 'lrs', 'measure', 'route', 'offset', 'clip'],
    classifiers=[
        "Development Status :: 1 - Planning",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: Unix",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: Microsoft :: Windows",
    ]
)
