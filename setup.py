"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='nixrt',
	author='nixrt contributors',
	version='0.1.0',
	packages=['nixrt', ],
	license='MIT',
	description='A lazy value run-time kernel for an embedding of the Nix expression language',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Topic :: Software Development :: Interpreters",
		"Topic :: Software Development :: Compilers",
    ],
	python_requires='>=3.9',
	install_requires=[
		"booze-tools>=0.6.2.1",
	],
)
