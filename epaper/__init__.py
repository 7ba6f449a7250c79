"""E-paper edition administration: page ordering and hotspot consistency."""
