# content/report_text.py

family_paragraph = """
Scores for the three most likely malware families. The family with the 
highest score is reported as the top-1 family in the JSON summary below.
"""

attention_paragraph = """
Attention weights over the disassembled opcode windows. Brighter cells mark 
the regions the model relied on most when assigning the family.
"""

som_paragraph = """
Each circle is one cell of the self-organizing map, split into wedges by the 
share of training samples from each family (top three families, the rest 
merged into OTHER). The black dot is the analyzed sample; its label is the 
distance-weighted vote of the five nearest cells.
"""

tsne_paragraph = """
Two-dimensional t-SNE projection of the training set embeddings, coloured by 
family. The black dot is the analyzed sample; its label is the majority vote 
of its seven nearest neighbours.
"""
