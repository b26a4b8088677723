from heap_region_advisor import summarize_node
from heap_region_advisor.collectors.geode_rest import GeodeRestClient
from heap_region_advisor.models.recommendation import NodeReport

# --- Example 1: Summarizing one cache member over REST ---
try:
    print("--- Summarizing cache member ---")
    report: NodeReport = summarize_node(
        GeodeRestClient("http://localhost:7070"),  # Replace with your member URL
        profile="summary",
    )

    print("\n--- Analysis Complete ---")
    print(f"Member: {report.member_name}")
    print(f"Largest object: {report.overall_max_size_bytes} bytes")
    print(f"Recommended region size: {report.recommendation.region_size_label.value}")
    print(f"JVM option: {report.recommendation.jvm_flag}")

except Exception as e:
    print(f"An error occurred: {e}")
