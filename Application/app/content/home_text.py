intro_paragraph = """
Drop one or more Windows executables below to queue them for analysis. Each 
file passes through disassembly, malware family identification, attention 
heatmap visualization and SOM analysis. Only .exe files are accepted; system 
files such as desktop.ini picked up when dropping a whole folder are skipped.
"""

queue_paragraph = """
Queued files and their predicted family are listed below. Open the analysis 
report to see where a sample lands on the t-SNE embedding and on the 
self-organizing maps.
"""
