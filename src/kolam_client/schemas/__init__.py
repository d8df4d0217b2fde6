"""Typed values exchanged between the controller and its collaborator."""
