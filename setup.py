from setuptools import find_packages, setup

setup(
    name="clave",
    description="Deterministic passwords, Ed25519 keys and signatures from matrices of numbers",
    use_scm_version={"write_to": "clave/_version.py", "fallback_version": "0.1.0"},
    setup_requires=["setuptools_scm"],
    packages=find_packages(include=["clave", "clave.*"]),
    python_requires=">=3.10",
    install_requires=[
        "cryptography>=3.1",
        "numpy",
        "tracerite",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["clave = clave.cli:main"]},
)
