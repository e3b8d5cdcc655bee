"""Academics course-context package.

This package exposes the course context (programs, semesters and the
teacher/student course assignments), the repository and model modules
it is built on, and the FastAPI application that serves it. Individual
modules contain the concrete implementations and documentation.
"""
