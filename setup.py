from setuptools import setup, find_packages


setup(
    name='volwarp',
    version='0.1a',
    packages=find_packages(exclude=['tests', 'tests.*']),
    license='MIT',
    description='Affine warping of 3D scalar volumes',
    python_requires='>=3.8',
    install_requires=['nibabel', 'numpy', 'scipy', 'joblib>=1.3'],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={'console_scripts': ['volwarp = volwarp.driver:main']},
)
