"""Per-kind analyzers for pods, workloads, services, ingresses, policies and nodes."""