from setuptools import setup


package_name = "parksim"


setup(
    name=package_name,
    version="0.1.0",
    package_dir={"": "src"},
    packages=[package_name],
    python_requires=">=3.8",
    install_requires=[
        "setuptools",
        "numpy",
        "matplotlib>=3.5",
    ],
    extras_require={
        "test": ["pytest"],
    },
    zip_safe=True,
    maintainer="parksim",
    maintainer_email="parksim@example.com",
    description="Parking practice simulator with a kinematic bicycle-model car.",
    license="MIT",
    entry_points={
        "console_scripts": [
            "parksim = parksim.cli:app_main",
            "parksim-drive = parksim.cli:drive_main",
            "parksim-maps = parksim.cli:maps_main",
        ],
    },
)
