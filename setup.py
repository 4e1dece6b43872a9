from setuptools import setup, find_packages

setup(
    name='vkguide',
    version='0.1.0',
    author='Grant Duffy',
    author_email='grantmduffy@gmail.com',
    description='Vulkan tutorial programs, their present loop, and the guide site.',
    packages=find_packages(include=['vkguide', 'vkguide.*']),
    package_data={'vkguide.site': ['templates/*.html']},
    install_requires=[
        'vulkan',
        'numpy',
        'glfw',
        'PyGLM',
        'fastapi',
        'uvicorn',
        'jinja2',
        'markdown',
        'PyYAML',
        'Pillow',
    ],
    extras_require={
        'test': ['pytest', 'httpx'],
        'docs': ['sphinx'],
    },
    entry_points={
        'console_scripts': ['vkguide-site=vkguide.site.server:main'],
    },
)
