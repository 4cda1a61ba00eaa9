"""Application services

Services validate commands, check board permissions, mutate the domain and
persist through the repositories. They return a Result and never raise.
"""
