import setuptools


with open("README.md") as fp:
    long_description = fp.read()


setuptools.setup(
    name="minecraft-ondemand",
    version="1.0.0",

    description="CDK app for an on-demand Minecraft server on ECS Fargate",
    long_description=long_description,
    long_description_content_type="text/markdown",

    author="Christopher Lee",

    package_dir={"": "cdk"},
    packages=setuptools.find_packages(where="cdk"),

    install_requires=[
        "aws-cdk-lib==2.195.0",
        "constructs>=10.0.0,<11.0.0",
        "boto3",
    ],

    extras_require={
        "test": [
            "pytest",
        ],
    },

    python_requires=">=3.10",

    classifiers=[
        "Development Status :: 4 - Beta",

        "Intended Audience :: Developers",

        "License :: OSI Approved :: Apache Software License",

        "Programming Language :: Python :: 3.10",

        "Topic :: Software Development :: Code Generators",
        "Topic :: Utilities",

        "Typing :: Typed",
    ],
)
