from setuptools import setup, find_packages


def scm_version():
    def local_scheme(version):
        return version.format_choice("+{node}", "+{node}.dirty")

    return {
        "relative_to": __file__,
        "version_scheme": "guess-next-dev",
        "local_scheme": local_scheme,
        "fallback_version": "0.1.0",
    }


setup(
    name="uciephyana",
    use_scm_version=scm_version(),
    description="Analog generators and driver characterization for a UCIe PHY",
    license="BSD",
    setup_requires=["wheel", "setuptools", "setuptools_scm"],
    python_requires=">=3.8",
    install_requires=[
        "hdl21>=4.0",
        "vlsirtools>=4.0",
        "sky130-hdl21>=4.0",
        "pydantic",
        "numpy",
        "matplotlib",
    ],
    extras_require={
        "test": ["pytest"],
    },
    packages=find_packages(include=["uciephyana", "uciephyana.*"]),
)
