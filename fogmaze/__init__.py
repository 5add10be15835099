"""Layered fog-of-war maze generation.

A maze is a graph of independently generated layers. Each new layer is
grafted onto an existing one at a cell deep enough that the seam lies outside
anything the player could have seen.
"""
