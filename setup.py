from setuptools import setup

with open('README.rst') as f:
    readme = f.read()

setup(
    name='adb_client',
    version='0.1.0',
    description='An asyncio client for the ADB server, with shell v2, FileSync, and framebuffer functionality.',
    long_description=readme,
    keywords=['adb', 'android'],
    url='https://github.com/JeffLIrion/adb_client',
    author='Jeff Irion',
    author_email='jefflirion@users.noreply.github.com',
    packages=['adb_client', 'adb_client.transport'],
    install_requires=['aiofiles>=0.4.0', 'Pillow'],
    tests_require=['pytest'],
    extras_require = {'test': ['pytest']},
    python_requires='>=3.8',
    classifiers=['Operating System :: OS Independent',
                 'License :: OSI Approved :: Apache Software License',
                 'Programming Language :: Python :: 3'],
    test_suite='tests'
)
