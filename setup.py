"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='crosswire',
	version='0.1.0',
	packages=['crosswire'],
	entry_points={
		'console_scripts': ["crosswire = crosswire.cmdline:main"],
	},
	license='MIT',
	description='Compiler core that lowers declarative UI component classes for several UI runtimes',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.12",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Topic :: Software Development :: Compilers",
		"Environment :: Console",
    ],
	python_requires='>=3.11',
	install_requires=[
		"booze-tools>=0.6.2.1",
	]
)
