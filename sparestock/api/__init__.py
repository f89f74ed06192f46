# API Package
