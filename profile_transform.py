#!/usr/bin/env python3
"""Profile markupnodes to find performance bottlenecks."""

import cProfile
import io
import pstats

from markupnodes import HTMLTransformer, TransformOptions

# Sample HTML
html = """
<article class="post">
    <h1>Title</h1>
    <p style="font-size: 14px; line-height: 1.5">Paragraph with <b>bold</b>, <em>italic</em><br>and a break.</p>
    <ul><li>One</li><li>Two <code>x()</code></li></ul>
    <ol><li><p>First</p></li><li>Second</li></ol>
    <table>
        <thead><tr><th>Name</th><th>Value</th></tr></thead>
        <tbody><tr><td>Cell 1</td><td>Cell 2</td></tr></tbody>
    </table>
    <img src="a.png" width="320" style="height: 200px">
    <script>ignored()</script>
</article>
""" * 100  # Repeat for more meaningful results

transformer = HTMLTransformer(TransformOptions(remove_all_class=False))

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    nodes = transformer.transform(html)

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
