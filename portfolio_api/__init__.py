"""Serverless API behind the portfolio site: contact form, projects and submissions."""
